"""
VideoTube Backend - API Routes Package
========================================

Route Inventory (all under /api/v1):
    - healthcheck.py:    GET    /healthcheck
    - videos.py:         GET/POST /videos, GET/PATCH/DELETE /videos/{id},
                         PATCH /videos/toggle/publish/{id}
    - comments.py:       GET/POST /comments/{video_id}, PATCH/DELETE /comments/c/{id}
    - likes.py:          POST /likes/toggle/{v|c|t}/{id}, GET /likes/videos
    - tweets.py:         POST /tweets, GET /tweets/user/{user_id},
                         PATCH/DELETE /tweets/{id}
    - subscriptions.py:  POST/GET /subscriptions/c/{channel_id},
                         GET /subscriptions/u/{subscriber_id}
    - playlists.py:      POST /playlist, GET /playlist/user/{user_id},
                         GET/PATCH/DELETE /playlist/{id},
                         PATCH /playlist/add|remove/{video_id}/{playlist_id}

Routes stay thin: read the request, call one service method, wrap the
result in ApiResponse. Business rules live in the services.
"""
