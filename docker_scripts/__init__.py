"""Helper scripts run inside the server container"""
