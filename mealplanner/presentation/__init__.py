"""Presentation Layer (FastAPI)"""
