# Utils package for the Durban Smart City backend
