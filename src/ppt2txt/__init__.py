"""ppt2txt: plain-text reports from presentation decks."""

__version__ = "3.2.0"
