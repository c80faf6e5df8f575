"""street_trees package initializer.

This package contains the data pipeline modules used by the Shiny
application.  Modules include data loading, caching, filtering,
plotting and export helpers.  See individual module docstrings for
details.
"""
