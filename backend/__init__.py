"""
Backend wiring for the training session core: settings, AI client, composition root.
"""
