"""
Support for writing scripts on top of kclcat.

The expected usage of core kclcat types is like:

    from kclcat import CatalogService

The scripting package contains optional extensions instead, and the
expected usage is as follows:

    from kclcat.scripting import kcl_logging

That is, each module whose name starts with `kcl_` in this package is
an independent extension module you may want to load when writing
kclcat based scripts.
"""
