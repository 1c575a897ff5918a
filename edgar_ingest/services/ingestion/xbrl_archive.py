"""
XBRL package helpers: package URL derivation and instance-document lookup.

The full index links each filing's complete submission text file, e.g.

    edgar/data/12345/0000012345-20-000012.txt

while the XBRL package of the same filing lives at

    http://www.sec.gov/Archives/edgar/data/12345/000001234520000012/0000012345-20-000012-xbrl.zip
"""

from __future__ import annotations

import re
import zipfile
from typing import Optional, Tuple

from edgar_ingest.services.ingestion.clients.edgar_client import SEC_EDGAR_BASE_URL
from edgar_ingest.services.ingestion.errors import FormatFailure


TXT_SUFFIX = ".txt"
XBRL_ZIP_SUFFIX = "-xbrl.zip"
ACCESSION_PART_INDEX = 3

# Searched anywhere in the entry name (ticker-yyyymmdd.xml, abc_corp-20100331.xml).
# The _cal/_def/_lab/_pre linkbases and the .xsd schema never match.
INSTANCE_DOCUMENT_PATTERN = re.compile(r"[a-z0-9]+-[0-9]+\.xml")


def build_xbrl_zip_url(edgar_filename: str) -> Tuple[str, str]:
    """
    Derive the XBRL package URL from a full-index filename.

    Returns:
        (url, accession base name)

    Raises:
        FormatFailure when the filename is not a `.txt` submission path with
        at least four components.
    """
    if TXT_SUFFIX not in edgar_filename:
        raise FormatFailure(f"Unexpected file type: {edgar_filename}", filename=edgar_filename)

    parts = edgar_filename.split("/")
    if len(parts) <= ACCESSION_PART_INDEX:
        raise FormatFailure(f"Unexpected filename layout: {edgar_filename}", filename=edgar_filename)

    base_name = parts[ACCESSION_PART_INDEX]
    if base_name.endswith(TXT_SUFFIX):
        base_name = base_name[: -len(TXT_SUFFIX)]
    if not base_name:
        raise FormatFailure(f"Missing accession number in: {edgar_filename}", filename=edgar_filename)

    pre_base = base_name.replace("-", "")
    parts[ACCESSION_PART_INDEX] = f"{pre_base}/{base_name}{XBRL_ZIP_SUFFIX}"

    return SEC_EDGAR_BASE_URL + "/".join(parts), base_name


def is_xbrl_instance_name(entry_name: str) -> bool:
    return INSTANCE_DOCUMENT_PATTERN.search(entry_name) is not None


def find_instance_entry(archive: zipfile.ZipFile) -> Optional[zipfile.ZipInfo]:
    """First archive entry, in archive order, that looks like the instance document."""
    for info in archive.infolist():
        if info.is_dir():
            continue
        if is_xbrl_instance_name(info.filename):
            return info
    return None
