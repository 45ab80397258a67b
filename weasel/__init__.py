# weasel/__init__.py

# Self-adaptive evolution simulator based on Dawkins' weasel program.

__version__ = "1.0.0"
