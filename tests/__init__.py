"""Tests for the InstaMapper integration."""
