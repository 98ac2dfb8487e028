"""Core building blocks of kagglepy."""
