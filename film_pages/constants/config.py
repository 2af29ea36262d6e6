"""Default values for data sources and the build."""

# GraphQL film source
SWAPI_URL = "https://api.graphcms.com/simple/v1/swapi"
SWAPI_TYPE_NAME = "SWAPI"
SWAPI_FIELD_NAME = "swapi"

# Pixabay photo source
PIXABAY_API_URL = "https://pixabay.com/api/"
PIXABAY_DEFAULT_QUERY = "puppies"
PIXABAY_PHOTO_FIELD = "pixabayPhoto"
PIXABAY_ALL_PHOTOS_FIELD = "allPixabayPhoto"

# HTTP
REQUEST_TIMEOUT_SECONDS = 30.0

# Preview server
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 9000
