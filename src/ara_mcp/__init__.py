"""MCP bridge over the ARA (Ansible Run Analysis) REST API.

Exposes recorded playbooks, plays, tasks, hosts and results as `ara://`
resources, plus tools for generic queries and playbook progress monitoring.
"""
