"""Fantasy cricket league: team assembly, point aggregation and leaderboards."""
