"""Auction ledger state: catalog, bids, clock and the ledger itself"""
