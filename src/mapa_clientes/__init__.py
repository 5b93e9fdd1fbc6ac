"""Client location lookup: spreadsheet importer, lookup API and map presentation."""

__version__ = "0.3.0"
