"""Artist manager: accounts, artist profiles and songs behind a JSON API."""
