import argparse
import sys
import zipfile
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .builder import decode
from .exceptions import DecodeError
from .manifest import ManifestError, ManifestInfo
from .printer import to_xml

MANIFEST_NAME = "AndroidManifest.xml"
LOG_FORMAT = "{line: >4}:{level}:\t{message}"


def configure_logging(verbosity: int) -> None:
    logger.remove()  # All configured handlers are removed
    logger.enable("axmldecoder")
    level = "WARNING"
    if verbosity == 1:
        level = "INFO"
    elif verbosity > 1:
        level = "DEBUG"
    logger.add(sys.stderr, format=LOG_FORMAT, level=level)


def load(path: Path) -> bytes:
    """
    Read a binary XML file, or the manifest inside of an APK.
    """
    if zipfile.is_zipfile(path):
        with zipfile.ZipFile(path, mode="r") as zf:
            logger.info("Reading {} from {}", MANIFEST_NAME, path)
            return zf.read(MANIFEST_NAME)
    return path.read_bytes()


def summary(info: ManifestInfo) -> str:
    lines = [
        "package: {}".format(info.package),
        "versionCode: {}".format(info.version_code),
        "versionName: {}".format(info.version_name),
        "minSdkVersion: {}".format(info.min_sdk_version),
        "targetSdkVersion: {}".format(info.target_sdk_version),
    ]
    for title, values in (
        ("permission", info.permissions),
        ("activity", info.activities),
        ("service", info.services),
        ("receiver", info.receivers),
        ("provider", info.providers),
    ):
        lines.extend("{}: {}".format(title, value) for value in values)
    return "\n".join(lines) + "\n"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="axmldecoder",
        description="Decode Android binary XML (AndroidManifest.xml, compiled layouts)",
    )
    parser.add_argument("file", type=Path, help="binary XML file or APK")
    parser.add_argument(
        "--summary", action="store_true", help="print the manifest metadata instead of XML"
    )
    parser.add_argument(
        "--no-pretty", dest="pretty", action="store_false", help="do not indent the XML"
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="more logging, repeat for debug output"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        raw = load(args.file)
    except (OSError, KeyError, zipfile.BadZipFile) as e:
        logger.error("Can not read {}: {}", args.file, e)
        return 1

    try:
        document = decode(raw)
    except DecodeError as e:
        logger.error("{} is not a supported binary XML file: {}", args.file, e)
        return 1

    if args.summary:
        try:
            sys.stdout.write(summary(ManifestInfo.from_document(document)))
        except ManifestError as e:
            logger.error(str(e))
            return 1
    else:
        try:
            xml = to_xml(document, pretty=args.pretty)
        except ValueError as e:
            logger.error("Can not print {} as XML: {}", args.file, e)
            return 1
        sys.stdout.write(xml.decode("utf-8"))
    return 0
