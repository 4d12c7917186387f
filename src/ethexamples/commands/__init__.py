"""
Commands - One module per example program.

- simple_transactions: pay wei between ganache accounts
- contract_deploy:     compile a Solidity project and deploy a contract
- contract_execution:  hand-built ERC-20 calls and transactions
- selector:            offline selector / call data helpers
"""
