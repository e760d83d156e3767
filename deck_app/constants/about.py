"""Static metadata describing DeckTalk."""

APP_NAME = "DeckTalk"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "DeckTalk is a conversation card deck. Draw prompts one at a time, filter and "
    "shuffle them by category, keep your own answers, and read what others wrote."
)
