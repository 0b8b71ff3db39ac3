# jobboard/constants.py

# fixed job type vocabulary (display order)
JOB_TYPE_OPTIONS = (
    "Full-time",
    "Part-time",
    "Contract",
    "Internship",
    "Remote",
    "Hybrid",
    "On-site",
)

REMOTE_TAG = "Remote"

# columns matched by the free-text search box
SEARCH_FIELDS = ("title", "company_name", "description", "location")

# page size choices offered by the pager
PAGE_SIZE_OPTIONS = (5, 10, 20, 50)

# how many numbered page buttons the pager shows
PAGE_WINDOW = 5

# stats windows (days)
ACTIVE_WINDOW_DAYS = 30
RECENT_WINDOW_DAYS = 7
