"""Gradio user interface for Smart Lister."""
