"""
Service layer: one async function per backend call, plus the webhook
simulator, its delivery queue, and the webhook listener.
"""
