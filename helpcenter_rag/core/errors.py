"""Exceptions raised by the scrape and embed pipeline."""


class HelpCenterRagError(Exception):
    """Base exception for the pipeline."""


class FetchError(HelpCenterRagError):
    """An index page could not be fetched (non-success status or network failure)."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class ContentNotFoundError(HelpCenterRagError):
    """An article page has no (or an empty) main content container.

    Soft failure: the converter logs it and skips the article.
    """


class NoLinksFoundError(HelpCenterRagError):
    """An index page was parsed but yielded no article links."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"No article links found on index page: {url}")


class MissingInputError(HelpCenterRagError):
    """A stage was invoked without the input it requires."""


class ProviderError(HelpCenterRagError):
    """The embedding provider or the vector store failed."""
