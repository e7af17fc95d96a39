"""TopicHub: users, topics and subscriptions for a notification platform."""
