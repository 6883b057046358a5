"""
VideoTube Backend - Services Layer
====================================

Business rules between the routes (HTTP) and the database.

Service Inventory:
    - common:               id parsing, owner check, fetch-or-404, pagination
    - MediaService:         upload validation and the S3 media host
    - VideoService:         listing, publishing, editing, publish toggle
    - CommentService:       per-video comment threads
    - LikeService:          like toggles and liked videos
    - TweetService:         short posts
    - SubscriptionService:  channel follow graph
    - PlaylistService:      playlists and their membership

Each service is a stateless singleton receiving the request's AsyncSession
as its first argument; the session dependency commits.
"""
