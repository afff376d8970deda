"""Shell core: parser, history, autocomplete and the session controller."""
