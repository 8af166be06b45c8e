"""vaultbridge - keep a Logseq graph and an Obsidian vault compatible."""

__version__ = "0.1.0"
