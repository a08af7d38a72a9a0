"""Command-line entrypoint for the Hytale server bootstrap"""
