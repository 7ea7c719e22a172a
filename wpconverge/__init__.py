"""wpconverge: converge a WordPress site toward declared state through wp-cli."""
