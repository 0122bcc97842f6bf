"""SQLite storage for price history, update history, request logs, fetch
errors, exchange weights and update intervals."""