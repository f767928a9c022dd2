"""Component identifiers for the Dash layout."""

STORE_SESSION = "store-session"
UPLOAD_PHOTOS = "upload-photos"
PREVIEW_LIST = "preview-list"
THUMB_REMOVE = "thumb-remove"
MESSAGE = "message"
PROGRESS = "progress"
BUTTON_SUBMIT = "submit-btn"
BUTTON_CLEAR = "clear-btn"
RESULT = "result"
INTERVAL_UPLOAD = "interval-upload"
