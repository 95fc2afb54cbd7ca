#!/usr/bin/env python3

"""Utility helpers for the exon length pipeline."""
