"""Wallet core: transaction state, construction and signing"""
