from .errors import error_response, internal_error
from .validation import is_positive_int, sanitize_input
