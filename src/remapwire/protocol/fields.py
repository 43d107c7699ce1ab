"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# ServerResponse carries its discriminator as an explicit sibling field;
# every other union is wrapped in a single key named after the variant.
STATUS = "status"

# Opaque token carried by every ClientMessage except Authenticate.
SESSION_ID = "session_id"

NEWLINE = b"\n"

UINT16_MAX = 0xFFFF
UINT64_MAX = 0xFFFFFFFFFFFFFFFF

# Widest integer range the JSON backends encode.
JSON_INT_MIN = -0x8000000000000000
