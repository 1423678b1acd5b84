"""contentsearch - unified search index for content modules.

Host applications call ``contentsearch.shared.logging.setup_logging()`` once at
startup, then build ``IndexWriter`` and ``QueryPlanner`` from
``contentsearch.domain.search`` around a session factory.
"""

__version__ = "0.1.0"
