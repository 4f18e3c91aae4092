"""Area routers: registration, profile and the profile's cars."""
