"""Page state configuration.

ViewStateConfig is a frozen dataclass — immutable after creation, no
string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ViewStateConfig:
    """Configuration shared by navigation, storage and the page host.

    All fields except ``secret_key`` have usable defaults::

        config = ViewStateConfig(secret_key="s3cr3t", base_uri="https://dash.local/")
    """

    # Navigation
    base_uri: str = "http://localhost/"
    max_redirects: int = 5  # Consecutive redirects a single page load may follow

    # Session storage
    secret_key: str = ""
    storage_salt: str = "viewstate.session-storage"

