from wadjet.webhook.server import main

main()
