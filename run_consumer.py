#!/usr/bin/env python
"""
Script to run the RabbitMQ delivery consumer for the Storefront Service
"""
from storefront.consumers.delivery_consumer import start_consumer

if __name__ == "__main__":
    start_consumer()
