"""Tests for orm_elastic."""
