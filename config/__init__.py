"""Application configuration modules, loaded by app.Support.Config."""
