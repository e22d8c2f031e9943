"""Thread-safe in-memory storage of servers, log files, entries, chunks and check results."""