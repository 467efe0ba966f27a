"""Python client for the txoko API: token storage, HTTP, session, realtime."""
