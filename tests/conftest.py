import pytest

from axmldecoder.constants import ValueType
from axml_writer import ANDROID_URI, AxmlWriter, manifest_writer


@pytest.fixture
def manifest_bytes():
    return manifest_writer().build()


APP_STRINGS = [
    "versionCode",
    "versionName",
    "minSdkVersion",
    "targetSdkVersion",
    "name",
    "label",
    "android",
    ANDROID_URI,
    "manifest",
    "package",
    "uses-sdk",
    "uses-permission",
    "application",
    "activity",
    "service",
    "receiver",
    "provider",
    "meta-data",
    "com.example.app",
    "1.2.3",
    "android.permission.INTERNET",
    "android.permission.CAMERA",
    ".MainActivity",
    "com.other.SyncService",
    ".BootReceiver",
    ".FileProvider",
    " generated by aapt ",
]


@pytest.fixture
def app_manifest_bytes():
    w = AxmlWriter(APP_STRINGS)
    a = ANDROID_URI
    w.start_namespace("android", a)
    w.start_element("manifest", [
        w.attr("versionCode", ns=a, data_type=ValueType.INT_DEC, data=42),
        w.attr("versionName", "1.2.3", ns=a),
        w.attr("package", "com.example.app"),
    ], comment=" generated by aapt ")
    w.start_element("uses-sdk", [
        w.attr("minSdkVersion", ns=a, data_type=ValueType.INT_DEC, data=21),
        w.attr("targetSdkVersion", ns=a, data_type=ValueType.INT_DEC, data=34),
    ], line_number=2)
    w.end_element("uses-sdk")
    for permission in ("android.permission.INTERNET", "android.permission.CAMERA"):
        w.start_element("uses-permission", [w.attr("name", permission, ns=a)], line_number=3)
        w.end_element("uses-permission")
    w.start_element("application", [
        w.attr("label", ns=a, data_type=ValueType.REFERENCE, data=0x7F0E0001),
    ], line_number=5)
    for tag, name in (
        ("activity", ".MainActivity"),
        ("service", "com.other.SyncService"),
        ("receiver", ".BootReceiver"),
        ("provider", ".FileProvider"),
    ):
        w.start_element(tag, [w.attr("name", name, ns=a)], line_number=6)
        w.end_element(tag)
    w.start_element("meta-data", line_number=10)
    w.end_element("meta-data")
    w.end_element("application")
    w.end_element("manifest")
    w.end_namespace("android", a)
    return w.build()
