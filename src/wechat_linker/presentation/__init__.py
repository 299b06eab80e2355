"""表现层"""
