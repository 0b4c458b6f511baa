"""
Arc Folder Archiver.

Archives shared Arc browser folders by scraping their share page, storing
the extracted payload and re-rendering it on demand.
"""

__version__ = "1.0.0"
