import pytest

from axmldecoder import ManifestInfo, decode
from axmldecoder.constants import ValueType
from axmldecoder.manifest import ManifestError
from axml_writer import ANDROID_URI, AxmlWriter


class TestManifestInfo(object):

    def test_app_manifest(self, app_manifest_bytes):
        info = ManifestInfo.from_document(decode(app_manifest_bytes))
        assert info.package == "com.example.app"
        assert info.version_code == 42
        assert info.version_name == "1.2.3"
        assert info.min_sdk_version == 21
        assert info.target_sdk_version == 34
        assert info.permissions == ["android.permission.INTERNET", "android.permission.CAMERA"]
        assert info.activities == ["com.example.app.MainActivity"]
        assert info.services == ["com.other.SyncService"]
        assert info.receivers == ["com.example.app.BootReceiver"]
        assert info.providers == ["com.example.app.FileProvider"]

    def test_minimal_manifest(self, manifest_bytes):
        info = ManifestInfo.from_document(decode(manifest_bytes))
        assert info.package == "com.example"
        assert info.permissions == ["X"]
        assert info.version_code is None
        assert info.activities == []

    def test_integer_stored_as_string(self):
        w = AxmlWriter(["manifest", "versionCode", "17", "uses-sdk", "minSdkVersion", "android", ANDROID_URI])
        w.start_element("manifest", [w.attr("versionCode", "17", ns=ANDROID_URI)])
        w.start_element("uses-sdk", [
            w.attr("minSdkVersion", ns=ANDROID_URI, data_type=ValueType.INT_HEX, data=0x1A),
        ])
        w.end_element("uses-sdk")
        w.end_element("manifest")
        info = ManifestInfo.from_document(decode(w.build()))
        assert info.version_code == 17
        assert info.min_sdk_version == 26

    def test_component_without_name(self):
        w = AxmlWriter(["manifest", "application", "activity"])
        w.start_element("manifest")
        w.start_element("application")
        w.start_element("activity")
        w.end_element("activity")
        w.end_element("application")
        w.end_element("manifest")
        info = ManifestInfo.from_document(decode(w.build()))
        assert info.activities == []

    def test_root_must_be_manifest(self):
        w = AxmlWriter(["LinearLayout"])
        w.start_element("LinearLayout")
        w.end_element("LinearLayout")
        with pytest.raises(ManifestError):
            ManifestInfo.from_document(decode(w.build()))
