"""Command line interface (`geocore`)."""
