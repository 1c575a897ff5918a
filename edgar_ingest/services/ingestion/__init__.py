"""
ingestion package — quarterly EDGAR acquisition and report normalization.

Submodules:
    - clients: EDGAR HTTP access.
    - full_index: quarterly index parsing and storage key derivation.
    - xbrl_archive: package URL derivation and instance-document lookup.
    - scraper: the acquisition pipeline.
    - repositories: SQL persistence of companies, report files and reports.
    - xbrl: raw fact parsing and canonical normalization.
    - pipelines: the normalization batch consumer.
"""
