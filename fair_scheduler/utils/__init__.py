"""Helpers shared by the CLI and file import/export"""
