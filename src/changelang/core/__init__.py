"""Core inspection, selection and rewrite logic."""
