"""Training Sessions API: accounts, bearer tokens and SSO sign-in."""
