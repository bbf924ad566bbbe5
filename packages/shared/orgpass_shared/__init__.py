"""Wire-format schemas shared by the orgpass server and its API clients."""
