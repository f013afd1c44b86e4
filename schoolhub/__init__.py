"""SchoolHub: multi-tenant school management API."""
