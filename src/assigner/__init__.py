"""Assigner - automatic pull request reviewer assignment service.

This package tracks teams, their members and pull requests, assigns
reviewers to new pull requests from the author's active teammates and
swaps in a replacement when an assigned reviewer drops out.
"""

__version__ = "0.1.0"
