DEFAULT_PAGE_LIMIT = 12
MAX_PAGE_LIMIT = 100

# Cloudinary transformation widths
class ImageSize:
    SMALL = 200
    MEDIUM = 500

CLASSIC_GENRE = "Văn học kinh điển"

RELATED_BY_GENRE = 5
RELATED_BY_AUTHOR = 3
RELATED_BY_YEAR = 3

MIN_PRICE = 10_000
MAX_PRICE = 10_000_000
MIN_PUBLICATION_YEAR = 1800
MIN_PAGES = 1
MAX_PAGES = 10_000
