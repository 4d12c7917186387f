"""
Chain - Interaction layer for the local development chain.

Provides the ganache process wrapper, JSON-RPC client, Solidity artifact
handling and transaction utilities.

Uses httpx + eth-account + eth-abi + py-solc-x instead of the heavyweight web3.py.
"""
