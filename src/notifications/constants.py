"""Field tags shared by notification models in their text (JSON) form."""

STATUS_CODE_TAG = "status_code"
STATUS_TEXT_TAG = "status_text"
