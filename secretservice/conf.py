"""Well-known names of the freedesktop.org Secret Service API.

These must match the daemon byte for byte.
"""

BUS_NAME = 'org.freedesktop.secrets'
SERVICE_PATH = '/org/freedesktop/secrets'
COLLECTION_PATH = '/org/freedesktop/secrets/collection'
DEFAULT_COLLECTION = '/org/freedesktop/secrets/aliases/default'

# "no prompt" / "no object"
NO_OBJECT = '/'

IFACE_SERVICE = 'org.freedesktop.Secret.Service'
IFACE_COLLECTION = 'org.freedesktop.Secret.Collection'
IFACE_ITEM = 'org.freedesktop.Secret.Item'
IFACE_SESSION = 'org.freedesktop.Secret.Session'
IFACE_PROMPT = 'org.freedesktop.Secret.Prompt'
IFACE_PROPERTIES = 'org.freedesktop.DBus.Properties'

ALGORITHM_PLAIN = 'plain'
ALGORITHM_DH = 'dh-ietf1024-sha256-aes128-cbc-pkcs7'
ALGORITHMS = frozenset({ALGORITHM_PLAIN, ALGORITHM_DH})

CONTENT_TYPE = 'text/plain; charset=utf8'

PROMPT_TIMEOUT = 60.0
