"""Middleware"""
