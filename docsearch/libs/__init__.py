"""
Libs Layer - clients for the external embedding and rerank services.
"""
