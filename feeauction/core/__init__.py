"""Core components: chain host, tokens, AMM collaborators and the auction engine"""
