"""
Laundry Booking — Admin Dashboard

Analytics client for the laundry booking WordPress backend: fetches raw
orders and their related collections, joins them into display-ready
orders and derives the figures shown on the admin screens.

To connect a front end:
    Build an ApiClient with a credential provider (a TokenStore works),
    await loaders.fetch_laundry_orders(client), then pass the list to
    dashboard.get_dashboard_summary(orders) or
    dashboard.get_statistics_summary(orders) for card values.

To run without a backend:
    simulator.generate_raw_collections() produces synthetic payloads and
    simulator.build_demo_transport() serves them to an ApiClient.
"""
